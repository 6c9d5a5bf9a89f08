"""
Pytest configuration for the deal coach tests.
"""
import os
import sys

# Add the service directory to path so its modules import the way they do at runtime
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, os.path.join(project_root, "deal-coach"))
