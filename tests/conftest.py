import os
import sys

# Ensure repository root is on sys.path so 'xorfile' is importable without installing
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
