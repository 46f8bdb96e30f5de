# routes/__init__.py
# Blueprints: auth, main (participants and judges), admin (organizers)
