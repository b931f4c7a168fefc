"""Settings package for the TravelEase project.

`base.py` contains configuration shared by every environment. `dev.py`,
`prod.py` and `test.py` extend it with environment specific overrides.
"""
