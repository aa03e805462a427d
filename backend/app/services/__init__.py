# Services package init
"""
Quizo Backend — Services Layer
===============================

What:  Business logic layer sitting between routes (HTTP) and the
       persistence gateway (app.database).

Service Inventory:
    - AuthService: credential verification for login
    - QuizService: quiz CRUD scoped by teacher id

Services receive the request's AsyncSession as an argument and hold no
state of their own, so each is a module-level singleton.
"""
