from aqsnet.pipeline import main

raise SystemExit(main())
