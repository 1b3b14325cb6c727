"""
Services layer - dispatch business logic.

DESIGN PRINCIPLE:
- Services contain business logic, NOT routes
- Classification, matching, deciding and notifying are separate services;
  DispatchEngine wires them together
- Anything automation cannot decide safely is a human decision, surfaced
  through the admin inbox
"""
