from .hypergeometric import HypergeometricTest, HypergeometricResult
