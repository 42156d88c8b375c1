"""
Session subsystem.

Components:
- session_models.py: User, stored tokens, session phase / guard decisions
- token_store.py: JSON file persistence for the token pair
- manager.py: restore/login/logout lifecycle + view guards
- auth_flow.py: login/register/guest submit handlers
"""
