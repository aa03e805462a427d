# Routes package init
"""
Quizo Backend — API Routes Package
===================================

Route Inventory:
    - auth.py:     POST   /api/auth/login
    - quizzes.py:  POST   /api/quizzes
                   GET    /api/quizzes?teacher_id=N
                   GET    /api/quizzes/{id}
                   PUT    /api/quizzes/{id}
                   DELETE /api/quizzes/{id}
    - health.py:   GET    /api/health

Design Principle:
    Routes are THIN. They validate input (schemas, id coercion), call one
    service method and pick the status code. Failures are raised as
    app.exceptions types and turned into responses by main.py.
"""
