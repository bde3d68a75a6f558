from regsweep.cli import main

raise SystemExit(main())
