from inputs_fsck.cli import main

raise SystemExit(main())
