"""Food item identification from meal photos."""
