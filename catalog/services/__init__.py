"""
Services Package

Request-independent building blocks used by the controllers:
- store.py: EntityStore, CRUD over SQLAlchemy with one session per call
- validation.py: rule tables and the interpreter that applies them
- aggregation.py: gather_named(), concurrent named lookups
- forms.py: FormController, the create/update/delete/list/detail flows
"""
