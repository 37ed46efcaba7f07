import os

import numpy as np

from kivy.app import App
from kivy.clock import Clock
from kivy.core.window import Window
from kivy.graphics.texture import Texture
from kivy.logger import Logger
from kivy.uix.image import Image

from constants import TABLE_SIZE_FROM_SIZE
from errors import GIFError
from gifdecoder import load
from compositor import Playback
from gifplayer import DEFAULT_MIN_DELAY


class GifPlayerApp(App):

    def build(self):
        self.view = Image(fit_mode='contain')
        self.frames = None
        self.event = None
        Window.bind(on_dropfile=self.on_dropfile)
        return self.view

    def on_dropfile(self, window, file_path, *args):
        if isinstance(file_path, bytes):
            file_path = file_path.decode('utf-8')

        if not os.path.isfile(file_path):
            Logger.warning(f'GifPlayer: {file_path} is not a file!')
            return

        try:
            gif = load(file_path, table_size_from=TABLE_SIZE_FROM_SIZE)
        except GIFError as e:
            Logger.error(f'GifPlayer: {file_path}: {e.__class__.__name__}: {e}')
            return

        Logger.info(f'GifPlayer: playing {file_path} ({gif.width}x{gif.height}, {len(gif.images)} images)')

        if self.event is not None:
            self.event.cancel()
        self.frames = Playback(gif).frames()
        self.show_next_frame()

    def show_next_frame(self, *args):
        frame = next(self.frames, None)
        if frame is None:
            return

        texture = Texture.create(size=(frame.width, frame.height), colorfmt='rgba')
        # kivy textures start at the bottom row
        texture.blit_buffer(np.flipud(frame.pixels).tobytes(), colorfmt='rgba', bufferfmt='ubyte')
        self.view.texture = texture

        delay = frame.delay if frame.delay > 0 else DEFAULT_MIN_DELAY
        self.event = Clock.schedule_once(self.show_next_frame, delay / 1000)


if __name__ == '__main__':
    app = GifPlayerApp()
    app.run()
