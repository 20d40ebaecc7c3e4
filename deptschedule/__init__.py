"""Department timetable: conflict-checked lesson placement and schedule queries."""
