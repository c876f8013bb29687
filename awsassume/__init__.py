"""Exchange an AWS source profile for temporary assume_role credentials"""

__version__ = '0.1.0'
