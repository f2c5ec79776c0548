"""
raster2vector: turn every pixel of a raster image into an SVG square.

Usage
    raster2vector [-i] <image> [-o <file.svg>] [-s <scale>] [-w <stroke width>]

Each pixel becomes a filled four-point polygon on a pixel grid scaled by
--scale; pixels that are not fully opaque are left transparent and every
polygon is outlined in black with --strokeWidth.
"""
import pathlib
import sys
import time
from typing import NamedTuple

import svgwrite
from PIL import Image
from rich.console import Console

from commandline import *

__prog__ = "raster2vector"

console = Console()
errors = Console(stderr=True)


class Options(Parser):
    input_file = Scalar("-i", "--inputFile", help='Name of input file, a raster image (the "-i" is optional).')
    output_file = Scalar("-o", "--outputFile", help="Name of output file, an SVG file (default is input file changed to .svg).")
    scale = Scalar("-s", "--scale", float, default=10.0, help="Scale factor.")
    stroke_width = Scalar("-w", "--strokeWidth", float, default=0.01, help="Width of strokes to use for all paths.")
    help = Switch("-h", "--help", help="Show this help text.")

    def validate(self):
        if not self.input_file.specified and len(self.positional) == 1:
            self.input_file.value = self.positional[0]
            self.input_file.specified = True
        elif not self.input_file.specified:
            return self.reject(
                "expected one input file but %d %s given" % (len(self.positional), "was" if len(self.positional) == 1 else "were"),
                title="missing input file",
                hint="pass a raster image path, with or without -i",
            )
        elif self.positional:
            return self.reject(UnexpectedPositionalError(
                "unexpected argument %r" % self.positional[0],
                title="unexpected argument",
                code=FaultCode.UNEXPECTED_POSITIONAL,
                input=self.positional[0],
                hint="the input file was already given with %s" % self.input_file.label,
            ))

        if not self.output_file.specified:
            self.output_file.value = str(pathlib.Path(self.input_file.value).with_suffix(".svg"))

        if not self.scale.value > 0:
            return self.reject("scale must be positive, not %s" % self.scale.value, title="invalid scale")
        if not self.stroke_width.value >= 0:
            return self.reject("stroke width cannot be negative, not %s" % self.stroke_width.value, title="invalid stroke width")

        return True


class RGBA(NamedTuple):
    red: int
    green: int
    blue: int
    alpha: int


class RasterImage:
    """
    Decoded raster image as a row-major byte buffer.

    Channel layouts: 1 gray, 2 gray + alpha, 3 RGB, 4 RGBA. Images in any
    other mode (palette, bitonal, 16-bit, CMYK, ...) are converted to RGBA
    while loading.
    """

    CHANNELS = {"L": 1, "LA": 2, "RGB": 3, "RGBA": 4}

    def __init__(self, path=None, /):
        self.width = 0
        self.height = 0
        self.channels = 0
        self.failure_reason = ""
        self._pixels = None
        if path is not None:
            self.load(path)

    def load(self, path, /):
        """Decode `path`; answers False and sets failure_reason instead of raising."""
        self._pixels = None
        self.width = self.height = self.channels = 0
        try:
            with Image.open(path) as image:
                if image.mode not in self.CHANNELS:
                    image = image.convert("RGBA")
                image.load()
                self.width, self.height = image.size
                self.channels = self.CHANNELS[image.mode]
                self._pixels = image.tobytes()
        except (OSError, ValueError, Image.DecompressionBombError) as exception:
            self.failure_reason = str(exception) or type(exception).__name__
            return False
        self.failure_reason = ""
        return True

    @property
    def valid(self):
        return self._pixels is not None

    @property
    def has_color(self):
        return self.channels >= 3

    @property
    def has_alpha(self):
        return self.channels in (2, 4)

    def pixel(self, row, col, /):
        """Native channel bytes of one pixel."""
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError("pixel (%d, %d) is outside a %dx%d image" % (row, col, self.width, self.height))
        index = (row * self.width + col) * self.channels
        return self._pixels[index:index + self.channels]

    def rgba(self, row, col, /):
        pixel = self.pixel(row, col)
        match self.channels:
            case 1:
                return RGBA(pixel[0], pixel[0], pixel[0], 0xFF)
            case 2:
                return RGBA(pixel[0], pixel[0], pixel[0], pixel[1])
            case 3:
                return RGBA(pixel[0], pixel[1], pixel[2], 0xFF)
            case _:
                return RGBA(pixel[0], pixel[1], pixel[2], pixel[3])

    def _clamp(self, row, col, /):
        return min(max(row, 0), self.height - 1), min(max(col, 0), self.width - 1)

    def pixel_clamped(self, row, col, /):
        return self.pixel(*self._clamp(row, col))

    def rgba_clamped(self, row, col, /):
        return self.rgba(*self._clamp(row, col))


def rasterize(image, output, /, *, scale, stroke_width, console=None):
    """
    Build an SVG drawing with one square polygon per pixel.

    Progress lines (time estimate, construction time) are printed on
    `console` when one is given.
    """
    drawing = svgwrite.Drawing(str(output), size=(scale * image.width, scale * image.height), debug=False)
    drawing.viewbox(0, 0, image.width, image.height)

    start = time.perf_counter()
    estimate = slow = None
    for row in range(image.height):
        for col in range(image.width):
            color = image.rgba(row, col)
            drawing.add(drawing.polygon(
                [(col, row), (col + 1, row), (col + 1, row + 1), (col, row + 1)],
                fill="none" if color.alpha < 0xFF else svgwrite.rgb(color.red, color.green, color.blue),
                stroke="black",
                stroke_width=stroke_width,
            ))

        if row == 0:
            estimate = image.height * (time.perf_counter() - start)
            if (slow := estimate > 2) and console is not None:
                console.print("Estimated path construction time: %d seconds" % estimate)

    elapsed = time.perf_counter() - start
    if console is not None:
        if slow:
            console.print("Actual path construction time:    %d seconds (%.1f%% difference from estimate)" % (
                elapsed, 100 * (elapsed - estimate) / elapsed
            ))
        else:
            console.print("Path construction time: %d ms" % (elapsed * 1000))

    return drawing


def main(argv=None):
    options = Options()
    if not options.parse(argv) or options.help:
        if options.fault is not None and not options.help:
            render(options.fault, output=errors)
        options.show_help(console)
        return 0 if options.help else 1

    console.print("Converting %s to %s." % (options.input_file.value, options.output_file.value), markup=False)
    console.print("Loading input image...")

    image = RasterImage(options.input_file.value)
    if not image.valid:
        errors.print("Cannot load %s: %s" % (options.input_file.value, image.failure_reason), markup=False)
        return 1

    console.print("Image is %dx%d, with %d color channels." % (image.width, image.height, image.channels))

    drawing = rasterize(
        image,
        options.output_file.value,
        scale=options.scale.value,
        stroke_width=options.stroke_width.value,
        console=console,
    )

    console.print("SVG paths generated.  Writing output .svg file...")
    try:
        drawing.save()
    except OSError as exception:
        errors.print("File output failed! %s" % exception, markup=False)
        return 1

    console.print("Completed successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
