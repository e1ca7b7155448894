"""Decision making for the player bot.

``perception`` holds the spatial predicates, ``action_schema`` the turn values
and ``strategy`` the state machine that ties them to the path searches.
"""
