"""NeuralEnhance: AI image upscaling and background removal on the desktop."""

__version__ = "0.1.0"
