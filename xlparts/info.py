__VERSION__ = "1.0.0"
