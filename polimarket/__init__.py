"""
PoliMarket - products, sellers and HR backend
"""
__version__ = "1.0.0"
