# adoption_risk/tools/__init__.py
