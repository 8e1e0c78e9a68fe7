import sys
import os

# Add the project root to path so tests can import the top-level modules directly
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
