from worldimport.cli.importer import main

raise SystemExit(main())
