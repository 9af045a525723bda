"""NiceGUI interface - thin visualization layer for chat interactions.

Delivers a landing form and a conversation view with rendered math.

Responsibilities:
    - Question form that seeds the first conversation
    - Chat message display with MathML-rendered math
    - Conversation sidebar sorted by recency
    - Like/dislike feedback notifications

Contains minimal business logic. Delegates state to the conversation store
and replies to the reply service.
"""
