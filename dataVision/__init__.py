"""Django project package for dataVision."""
