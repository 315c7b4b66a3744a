"""AccessEdu learning session tracking backend."""
