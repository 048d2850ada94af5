from stagedeploy.cli import main

raise SystemExit(main())
