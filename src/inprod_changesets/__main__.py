from inprod_changesets.cli import main

raise SystemExit(main())
