from subword_detok.cli import main

raise SystemExit(main())
