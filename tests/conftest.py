import os
import sys

import matplotlib

matplotlib.use("Agg")

# Make the flat modules importable without installing the project
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)
