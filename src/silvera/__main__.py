from silvera.cli import main

raise SystemExit(main())
