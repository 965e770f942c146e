# Session.py
"""""
State of one calculator window, kept apart from the (stateless) MathEngine.

The session owns everything the user edits or sees:
- display text and cursor position
- history of "<input> = <result>" entries
- the last result, substituted for 'ans'
- angle mode, graphing flag, the points of the current graph and the saved graphs

Every edit re-samples the graph, so the plot follows the input while it is typed.
"""""

import logging

from . import MathEngine
from .ScientificEngine import AngleMode

logger = logging.getLogger(__name__)

ANSWER_INDICATOR = "(ans)"


class Session:

    def __init__(self, settings=None):
        settings = settings or {}
        self.display = ""
        self.cursor_position = 0
        self.history = []
        self.last_result = ""
        self.graphing_points = {}
        self.saved_graphs = []
        self.angle_mode = AngleMode.from_setting(settings.get("angle_mode", AngleMode.RADIANS))
        self.graphing = bool(settings.get("graphing", True))
        self.max_depth = int(settings.get("max_nesting_depth", MathEngine.DEFAULT_MAX_DEPTH))

    # --- Settings ---
    def update_angle_unit(self, unit):
        """unit: 0/'radians' or 1/'degrees'."""
        self.angle_mode = AngleMode.from_setting(unit)
        self.evaluate_and_graph()

    def update_graphing(self, value):
        self.graphing = bool(value)
        self.evaluate_and_graph()

    # --- Editing ---
    def move_cursor(self, offset):
        self.cursor_position = max(0, min(len(self.display), self.cursor_position + offset))

    def insert_character(self, character):
        left_side = self.display[:self.cursor_position]
        right_side = self.display[self.cursor_position:]
        self.display = left_side + character + right_side
        self.cursor_position += len(character)
        self.evaluate_and_graph()

    def insert_operation(self, operation):
        """Insert a button text. Templates like 'sin()' or 'logb(,)' leave the cursor inside."""
        self.insert_character(operation)
        if "(" in operation and ")" in operation and operation != ANSWER_INDICATOR:
            self.move_cursor(-1)
        if "," in operation:
            self.move_cursor(-1)

    def input_number(self, number):
        self.insert_character(str(number))

    def add_decimal(self):
        self.insert_character(".")

    def delete_last_character(self):
        if self.cursor_position <= 0:
            return
        self.display = self.display[:self.cursor_position - 1] + self.display[self.cursor_position:]
        self.cursor_position -= 1
        self.evaluate_and_graph()

    def clear_display(self):
        # A second clear on an empty display also wipes the history
        if self.display == "":
            self.history = []
        self.display = ""
        self.cursor_position = 0
        self.evaluate_and_graph()

    def perform_operation(self, operation):
        if operation == "=":
            self.calculate()
        else:
            self.insert_operation(operation)

    # --- Evaluation ---
    def calculate(self):
        """Replace the display with its result and record it in the history."""
        original_input = self.display.replace(MathEngine.ANSWER_PLACEHOLDER, self.last_result)
        result = MathEngine.calculate(self.display, angle_mode=self.angle_mode,
                                      previous_answer=self.last_result, graphing=self.graphing,
                                      max_depth=self.max_depth)
        logger.info("%s = %s", original_input, result)

        self.history.append(f"{original_input} = {result}")
        self.last_result = result
        self.display = result
        self.cursor_position = len(self.display)
        self.evaluate_and_graph()
        return result

    def evaluate_and_graph(self):
        """Re-sample the graph of the current display."""
        self.graphing_points = MathEngine.graph(self.display, angle_mode=self.angle_mode,
                                                previous_answer=self.last_result, graphing=self.graphing,
                                                max_depth=self.max_depth)
        return self.graphing_points

    def save_graph(self):
        """Keep a copy of the current graph, drawn alongside later ones. Empty graphs are not kept."""
        if not self.graphing_points:
            return False
        self.saved_graphs.append(dict(self.graphing_points))
        return True
