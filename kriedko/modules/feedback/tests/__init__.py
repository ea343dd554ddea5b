# kriedko/modules/feedback/tests/__init__.py
