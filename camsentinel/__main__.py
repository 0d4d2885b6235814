from camsentinel.main import main

raise SystemExit(main())
