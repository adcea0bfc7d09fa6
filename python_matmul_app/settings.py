from enums import OverflowMode

DEFAULT_INPUT_FILE = "input_mat.txt"


class Settings:
    def __init__(self):
        self._input_path = DEFAULT_INPUT_FILE
        self._overflow_mode = OverflowMode.WRAP
        self._threads = 1
        self._b_verify = False

    def set_input_path(self, s_path):
        self._input_path = s_path

    def get_input_path(self):
        return self._input_path

    def set_overflow_mode(self, e_overflow_mode):
        self._overflow_mode = e_overflow_mode

    def get_overflow_mode(self):
        return self._overflow_mode

    def set_threads(self, i_threads):
        if i_threads < 1:
            raise ValueError(f"Thread count must be at least 1, got {i_threads}")
        self._threads = i_threads

    def get_threads(self):
        return self._threads

    def set_verify(self, b_is_need_verify):
        self._b_verify = b_is_need_verify

    def is_verify(self):
        return self._b_verify

    def get_overflow_mode_name(self):
        if self._overflow_mode == OverflowMode.CHECKED:
            return "Checked"

        return "Wrap (32-bit two's complement)"

    def print(self, file=None):
        print(f"Input file: {self._input_path}", file=file)
        print(f"Overflow mode: {self.get_overflow_mode_name()};", file=file)
        print(f"Threads: {self._threads}", file=file)
        print(f"Verify with numpy: {'yes' if self._b_verify else 'no'}", file=file)
