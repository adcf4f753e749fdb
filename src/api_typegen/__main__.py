from api_typegen.cli import main

raise SystemExit(main())
