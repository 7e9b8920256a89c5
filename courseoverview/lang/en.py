"""English strings, keyed by component then identifier."""

STRINGS = {
    "courseoverview": {
        "pluginname": "Local course overview",
        "privacy:metadata": "This plugin does not store any personal data.",
        "pendingassignments": "Pending assignments",
        "pendingassignmentsteacher": "Assignments pending to grade",
        "pendingquizzes": "Pending quizzes",
        "pendingquizzesteacher": "Quizzes pending to review",
        "onepostunread": "unread in",
        "manypostsunread": "unread in",
    },
    "question": {
        "notyetanswered": "Not yet answered",
        "answersaved": "Answer saved",
        "requiresgrading": "Requires grading",
        "correct": "Correct",
        "incorrect": "Incorrect",
        "partiallycorrect": "Partially correct",
        "notanswered": "Not answered",
    },
}
