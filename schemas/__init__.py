from .auth import *
from .categories import *
from .products import *
