import sys
from pathlib import Path

# scripts/ is a flat directory of executable modules, not a package
SCRIPTS_DIR = Path(__file__).resolve().parents[1] / "scripts"
sys.path.insert(0, str(SCRIPTS_DIR))
