import sys

from pr_approval_agent.approval_pipeline_main import main

sys.exit(main())
