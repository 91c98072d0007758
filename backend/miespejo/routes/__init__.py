# Routes package init
"""
MiEspejo Backend - API Routes Package
=====================================

Route Inventory:
    - health.py:  GET  /                       (liveness text)
                  GET  /health                 (JSON status)
    - habits.py:  GET  /habits/{user_id}       (active habit types of a user)
                  POST /habits                 (create habit type)
    - logs.py:    POST /logs/event             (counter event)
                  POST /logs/session/start     (open timed session)
                  PUT  /logs/session/end       (close timed session)

Routes stay thin: extract request data, call HabitService, pick the status code.
"""
