import sys

from workflow_dispatch.main import main  # pragma: no cover

# Allows `python -m workflow_dispatch` inside an Actions step.
if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
