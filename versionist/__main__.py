from versionist.cli import main

raise SystemExit(main())
