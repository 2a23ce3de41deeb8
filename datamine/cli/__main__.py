from datamine.cli.main import main

raise SystemExit(main())
