from .method import Method, MethodResult
from .hypergeometric import HypergeometricTest, HypergeometricResult
