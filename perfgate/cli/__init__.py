from .analyze import analyze as analyze
from .cli import main as main
from .cli import perfgate as perfgate
