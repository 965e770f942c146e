# UI.py
"""""
PySide6 user interface for Calculator Plus.

Structure
---------
- Calculator UI: main window with display, history, function panel and button grid
- Settings UI: modal dialog for user preferences

Responsibilities (Calculator)
-----------------------------
- Build window, display, layout and buttons
- Forward every edit (character insertion, cursor moves, deletion) to the Session
- Dispatch '=' to the Session in a worker thread
- Render the display with its cursor, the history and the size of the current graph
- Clipboard integration (copy result, Shift + click pastes)


Responsibilities (Settings)
---------------------------

- Load Current Settings and Settings Descriptions via Config_Manager
- Validate user input (e.g. minimum nesting depth)
- Save and apply angle mode, graphing and theme changes immediately


Threading Note
--------------
Evaluation (which also re-samples the graph) is executed off the UI thread in Worker(QObject).
Results (or errors) are emitted via a Qt signal and handled back in the UI.
"""""

# Ui.py
from PySide6 import QtWidgets
from PySide6.QtCore import Qt, QObject, Signal, QTimer
import sys
import logging
import threading
import pyperclip
from . import error as E  # Imports Error.py as a module
from . import config_manager as config_manager  # Imports config_manager.py as a module
from .Session import Session, ANSWER_INDICATOR

logger = logging.getLogger(__name__)

CURSOR_MARK = "│"
FUNCTION_ROWS = [
    ["sin", "cos", "tan", "csc", "sec", "cot"],
    ["asin", "acos", "atan", "acsc", "asec", "acot"],
    ["log", "ln", "abs", "floor", "ceil", "round"],
    ["logb", "root", "mod", "hypot", "nPr", "nCr"],
]
TWO_PARAMETER_ROW = 3
ANGLE_MODES = ["radians", "degrees"]


class Worker(QObject):
    """""

    This Class is always run in a seperat thread, responsible for handing the display to the Session
    and emits a Signal when the calculation is done / failed back to the Calculator UI for processing

    """""

    job_finished = Signal(object, str)

    def __init__(self, session):
        super().__init__()
        self.session = session
        self.data = session.display

    def run_Calc(self):

        try:
            # --- 1. Start Calculation ---
            result = self.session.calculate()

            # --- 2. Send Success Signal ---
            self.job_finished.emit(result, self.data)

        except E.MathError as e:
            # --- 3. Send Math Error Signal ---
            e.equation = self.data
            self.job_finished.emit(e, self.data)

        except Exception as e:
            # --- 4. Send Critical Error Signal ---
            logger.exception("Unexpected crash while calculating %r", self.data)
            critical_error = E.MathError(
                message=f"Unexpected crash: {e}",
                code="9999",
                equation=self.data
            )
            self.job_finished.emit(critical_error, self.data)


class SettingsDialog(QtWidgets.QDialog):
    """""

    Settings window. Every entry of config.json gets a widget, depending on its value:
    1. Checkboxes   (True or False)
    2. Input Fields (Integers)
    3. Drop down    (angle mode)

    """""

    settings_saved = Signal()  # Signal to tell the main window to update

    def __init__(self, parent=None):
        super().__init__(parent)
        self.widgets = {}  # Dictionary, in which all of the Widgets (Setting options) are stored.

        # --- 1. Window Setup ---
        self.setWindowTitle("Calculator Settings")
        self.setMinimumSize(300, 200)

        main_layout = QtWidgets.QVBoxLayout(self)

        # --- 2. Load Settings ---
        self.setting_value_list = config_manager.load_settings()
        self.setting_description_list = config_manager.load_setting_description("all")

        # --- 3. Build Widgets ---
        for key_value, value in self.setting_value_list.items():
            description = self.setting_description_list.get(key_value, key_value)

            # --- 3a. Checkbox Builder (for Boolean settings) ---
            if isinstance(value, bool):
                checkbox = QtWidgets.QCheckBox(description)
                checkbox.setChecked(value)
                main_layout.addWidget(checkbox)
                self.widgets[key_value] = checkbox

            # --- 3b. Drop down for the angle mode ---
            elif key_value == "angle_mode":
                row_h_layout = QtWidgets.QHBoxLayout()
                main_layout.addLayout(row_h_layout)
                combo_box = QtWidgets.QComboBox()
                combo_box.addItems(ANGLE_MODES)
                if value in ANGLE_MODES:
                    combo_box.setCurrentIndex(ANGLE_MODES.index(value))
                row_h_layout.addWidget(QtWidgets.QLabel(description))
                row_h_layout.addWidget(combo_box)
                self.widgets[key_value] = combo_box

            # --- 3c. Input Field Builder (for Integer settings) ---
            elif isinstance(value, int):
                row_h_layout = QtWidgets.QHBoxLayout()
                main_layout.addLayout(row_h_layout)
                label = QtWidgets.QLabel(description + " (min. 2):")
                input_field = QtWidgets.QLineEdit()
                input_field.setPlaceholderText(str(value))  # Show current value as placeholder
                row_h_layout.addWidget(label)
                row_h_layout.addWidget(input_field)
                row_h_layout.setStretch(1, 1)
                self.widgets[key_value] = input_field

        # --- 4. OK / Cancel Buttons ---
        button_box = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel)
        main_layout.addWidget(button_box)
        main_layout.addStretch(1)

        button_box.accepted.connect(lambda: self.save_settings(self.setting_value_list))
        button_box.rejected.connect(self.reject)

        self.update_darkmode()

    def save_settings(self, setting_value_list):
        for key_value, widget in self.widgets.items():

            # --- 1. Checkboxes ---
            if isinstance(widget, QtWidgets.QCheckBox):
                setting_value_list[key_value] = widget.isChecked()

            # --- 2. Angle mode ---
            elif isinstance(widget, QtWidgets.QComboBox):
                setting_value_list[key_value] = widget.currentText()

            # --- 3. Input Fields (like 'max_nesting_depth') ---
            elif isinstance(widget, QtWidgets.QLineEdit):
                new_value_str = widget.text().strip()

                # If user left it blank, keep the old value
                if new_value_str == "":
                    continue

                try:
                    new_value_int = int(new_value_str)
                    if new_value_int < 2:
                        raise ValueError(f"'{new_value_int}' is too small. Minimum is 2.")
                except ValueError as e:
                    # Show an error box and STOP the save process
                    logger.warning("Invalid input for %s: %s", key_value, e)
                    QtWidgets.QMessageBox.critical(self, "Invalid Input:",
                                                   f"Error in input for '{key_value}':\n\n{e}\n\nPlease correct your input.")
                    return

                setting_value_list[key_value] = new_value_int

        # --- 4. Write to File ---
        saved_settings = config_manager.save_setting(setting_value_list)

        if saved_settings != {}:
            self.settings_saved.emit()
            self.accept()
        else:
            QtWidgets.QMessageBox.critical(self, "Error",
                                           f"Error 4501: {E.ERROR_MESSAGES['4501']}config.json")

    def update_darkmode(self):
        if self.setting_value_list.get("darkmode") == True:
            self.setStyleSheet("""
                        QDialog {background-color: #121212;}
                        QLabel {color: white;}
                        QCheckBox {color: white;}
                        QComboBox {background-color: #444444;color: white;}
                        QLineEdit {background-color: #444444;color: white;border: 1px solid #666666;}
                        QDialogButtonBox QPushButton {background-color: #666666;color: white;}""")
        else:
            self.setStyleSheet("")


class CalculatorWindow(QtWidgets.QWidget):
    # --- Class-level attributes for button hold logic ---
    initial_delay = 500
    repeat_interval = 100

    def __init__(self):
        super().__init__()

        # --- 1. Load Settings ---
        self.setting_value_list = config_manager.load_settings()
        self.session = Session(self.setting_value_list)

        # --- 2. Instance State Variables ---
        self.thread_active = False  # Is a calculation running?
        self.shift_is_held = False
        self.was_held = False
        self.held_button_value = None
        self.hold_timer = QTimer(self)
        self.hold_timer.timeout.connect(self.handle_hold_tick)
        self.button_objects = {}

        # --- 3. Window Setup ---
        self.setWindowTitle("Calculator Plus")
        self.resize(520, 720)
        main_v_layout = QtWidgets.QVBoxLayout(self)

        expanding_policy = QtWidgets.QSizePolicy(
            QtWidgets.QSizePolicy.Policy.Expanding,
            QtWidgets.QSizePolicy.Policy.Expanding
        )

        # --- 4. History + Display ---
        self.history_list = QtWidgets.QListWidget()
        main_v_layout.addWidget(self.history_list, 1)

        self.display = QtWidgets.QLineEdit(CURSOR_MARK)
        self.display.setAlignment(Qt.AlignmentFlag.AlignRight)
        self.display.setReadOnly(True)
        font = self.display.font()
        font.setPointSize(28)
        self.display.setFont(font)
        main_v_layout.addWidget(self.display)

        self.graph_label = QtWidgets.QLabel("")
        self.graph_label.setAlignment(Qt.AlignmentFlag.AlignRight)
        main_v_layout.addWidget(self.graph_label)

        # --- 5. Function Panel (inserted as templates, cursor lands inside) ---
        function_container = QtWidgets.QWidget()
        function_grid = QtWidgets.QGridLayout(function_container)
        function_grid.setSpacing(0)
        function_grid.setContentsMargins(0, 0, 0, 0)
        for row, names in enumerate(FUNCTION_ROWS):
            for col, name in enumerate(names):
                template = f"{name}(,)" if row == TWO_PARAMETER_ROW else f"{name}()"
                self.add_button(function_grid, name, row, col, template, expanding_policy)
        main_v_layout.addWidget(function_container, 2)

        # --- 6. Button Grid Setup ---
        button_container = QtWidgets.QWidget()
        main_v_layout.addWidget(button_container, 3)
        button_grid = QtWidgets.QGridLayout(button_container)
        button_grid.setSpacing(0)
        button_grid.setContentsMargins(0, 0, 0, 0)

        # (text, row, column)
        self.buttons = [
            ('⚙', 0, 0), ('📋', 0, 1), ('←', 0, 2), ('→', 0, 3), ('Ans', 0, 4), ('x', 0, 5),
            ('⌫', 1, 0), ('C', 1, 1), ('7', 1, 2), ('8', 1, 3), ('9', 1, 4), ('÷', 1, 5),
            ('EE', 2, 0), (',', 2, 1), ('4', 2, 2), ('5', 2, 3), ('6', 2, 4), ('⋅', 2, 5),
            ('(', 3, 0), (')', 3, 1), ('1', 3, 2), ('2', 3, 3), ('3', 3, 4), ('-', 3, 5),
            ('√', 4, 0), ('^', 4, 1), ('0', 4, 2), ('.', 4, 3), ('=', 4, 4), ('+', 4, 5),
            ('e', 5, 0), ('π', 5, 1), ('Save', 5, 2),
        ]

        # Buttons that support "press and hold"
        HOLD_BUTTONS = ['0', '1', '2', '3', '4', '5', '6', '7', '8', '9', '⌫', '←', '→']

        for text, row, col in self.buttons:
            button = self.add_button(button_grid, text, row, col, text, expanding_policy)
            if text == '=':
                button.setStyleSheet("background-color: #007bff; color: white; font-weight: bold;")
            if text in HOLD_BUTTONS:
                button.pressed.connect(lambda val=text: self.handle_button_pressed_hold(val))
                button.released.connect(self.handle_button_released_hold)

        self.update_darkmode()
        self.refresh()

    def add_button(self, grid, text, row, col, value, size_policy):
        button = QtWidgets.QPushButton(text)
        button.setSizePolicy(size_policy)
        button.clicked.connect(lambda checked=False, val=value: self.handle_button_clicked(val))
        grid.addWidget(button, row, col)
        self.button_objects[text] = button
        return button

    # --- Button Hold Logic ---
    def handle_button_pressed_hold(self, value):
        self.was_held = False
        self.held_button_value = value
        self.hold_timer.setInterval(self.initial_delay)
        self.hold_timer.start()

    def handle_button_released_hold(self):
        self.hold_timer.stop()
        self.held_button_value = None

    def handle_button_clicked(self, value):
        # A click that ends a hold was already handled by the timer
        if self.was_held:
            self.was_held = False
            return
        self.handle_button_press(value)

    def handle_hold_tick(self):
        self.was_held = True
        if self.hold_timer.interval() == self.initial_delay:
            self.hold_timer.setInterval(self.repeat_interval)
        if self.held_button_value:
            self.handle_button_press(self.held_button_value)

    # --- Key Event Handlers ---
    def keyPressEvent(self, event):
        key = event.key()
        if key == Qt.Key.Key_Shift:
            self.shift_is_held = True
        elif key in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
            self.handle_button_press('=')
        elif key == Qt.Key.Key_Backspace:
            self.handle_button_press('⌫')
        elif key == Qt.Key.Key_Left:
            self.handle_button_press('←')
        elif key == Qt.Key.Key_Right:
            self.handle_button_press('→')
        elif key == Qt.Key.Key_Escape:
            self.handle_button_press('C')
        elif event.text() and event.text().isprintable():
            self.handle_button_press(event.text())
        super().keyPressEvent(event)

    def keyReleaseEvent(self, event):
        if event.key() == Qt.Key.Key_Shift:
            self.shift_is_held = False
        super().keyReleaseEvent(event)

    def handle_button_press(self, value):
        if self.thread_active:
            logger.warning("Error 4002: %s", E.ERROR_MESSAGES["4002"])
            return

        if value == '⚙':
            self.open_settings()
            return

        elif value == '📋':
            # Copy the display; with Shift held, paste the clipboard at the cursor
            if self.shift_is_held:
                clipboard_text = pyperclip.paste()
                if clipboard_text:
                    self.session.insert_character(clipboard_text.strip())
            else:
                pyperclip.copy(self.session.display)

        elif value == '←':
            self.session.move_cursor(-1)
        elif value == '→':
            self.session.move_cursor(1)
        elif value == '⌫':
            self.session.delete_last_character()
        elif value == 'C':
            self.session.clear_display()
        elif value == 'Ans':
            self.session.perform_operation(ANSWER_INDICATOR)
        elif value == 'EE':
            self.session.perform_operation("E")
        elif value == 'Save':
            self.session.save_graph()

        elif value == '=':
            # --- Start Worker Thread ---
            self.thread_active = True
            self.update_return_button()
            worker_instance = Worker(self.session)
            worker_instance.job_finished.connect(self.Calc_result)
            self.worker_instance = worker_instance  # keep the QObject alive until it reports back
            my_thread = threading.Thread(target=worker_instance.run_Calc)
            my_thread.start()
            return  # Result will arrive via signal.

        else:
            self.session.perform_operation(value)

        self.refresh()

    def refresh(self):
        # --- Display with cursor, history and graph size ---
        text = self.session.display
        cursor = self.session.cursor_position
        self.display.setText(text[:cursor] + CURSOR_MARK + text[cursor:])

        self.history_list.clear()
        self.history_list.addItems(self.session.history)
        self.history_list.scrollToBottom()

        points = len(self.session.graphing_points)
        mode = self.session.angle_mode.value
        saved = len(self.session.saved_graphs)
        label = f"{mode} | graph: {points} points" if points else mode
        if saved:
            label += f" | saved: {saved}"
        self.graph_label.setText(label)

    def update_return_button(self):
        return_button = self.button_objects.get('=')
        if not return_button:
            return
        if self.thread_active:
            return_button.setStyleSheet("background-color: #FF0000; color: white; font-weight: bold;")
        else:
            return_button.setStyleSheet("background-color: #007bff; color: white; font-weight: bold;")

    def update_darkmode(self):
        if self.setting_value_list.get("darkmode") == True:
            for text, button in self.button_objects.items():
                if text != '=':
                    button.setStyleSheet("background-color: #121212; color: white; font-weight: bold;")
            self.setStyleSheet("background-color: #121212; color: white;")
            self.display.setStyleSheet("background-color: #121212; color: white; font-weight: bold;")
        else:
            for text, button in self.button_objects.items():
                if text != '=':
                    button.setStyleSheet("font-weight: normal;")
            self.setStyleSheet("")
            self.display.setStyleSheet("font-weight: bold;")
        self.update_return_button()

    def open_settings(self):
        settings_dialog = SettingsDialog(self)
        settings_dialog.exec()  # modal

        # --- Reload settings after dialog closes ---
        self.setting_value_list = config_manager.load_settings()
        self.session.max_depth = int(self.setting_value_list["max_nesting_depth"])
        self.session.update_angle_unit(self.setting_value_list["angle_mode"])
        self.session.update_graphing(self.setting_value_list["graphing"])
        self.update_darkmode()
        self.refresh()

    def get_message_box_stylesheet(self):
        if self.setting_value_list.get("darkmode") == True:
            return """
                QMessageBox { background-color: #121212; color: white; }
                QLabel { color: white; }
                QPushButton { background-color: #2e2e2e; color: white; border: 1px solid #444444; padding: 5px 15px; }
            """
        return ""

    def Calc_result(self, result, equation):
        self.thread_active = False
        self.update_return_button()

        if isinstance(result, E.MathError):
            error_box = QtWidgets.QMessageBox(self)
            error_box.setIcon(QtWidgets.QMessageBox.Critical)
            error_box.setWindowTitle(E.error_category(result.code))
            error_box.setText(f"Error {result.code}: {E.ERROR_MESSAGES.get(result.code, 'Unknown error')}")
            error_box.setInformativeText(f"Details: {result.message}\nEquation: {result.equation}")
            error_box.setStandardButtons(QtWidgets.QMessageBox.Ok)
            error_box.setStyleSheet(self.get_message_box_stylesheet())
            error_box.exec()

        self.refresh()


def main():
    # --- Main Application Entry Point ---
    app = QtWidgets.QApplication(sys.argv)
    window = CalculatorWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
