"""
atlaspack CLI - Command-line interface for packing sprites into an atlas
"""

import logging
import sys
import time

import click
from pydantic import ValidationError

from atlaspack.atlas import AtlasBuilder, AtlasResult
from atlaspack.config import DEFAULT_ATLAS_SIZE, DEMO_ATLAS_SIZE, AtlasConfig
from atlaspack.demo import random_boxes
from atlaspack.exceptions import AtlasError, DecodeFailure
from atlaspack.sources import discover_images, load_image


class StageTimer:
    """Prints per-stage timings when verbose."""

    def __init__(self, verbose: bool):
        self.verbose = verbose
        self.start = self.prev = time.perf_counter()

    def lap(self, label: str) -> None:
        now = time.perf_counter()
        if self.verbose:
            click.echo(f" - {label} {'.' * (28 - len(label))} {(now - self.prev) * 1000:.2f}ms")
        self.prev = now

    def done(self) -> None:
        if self.verbose:
            click.echo(f"Done {'.' * 25} {(time.perf_counter() - self.start) * 1000:.2f}ms")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s"
    )


def _run(builder: AtlasBuilder, output: str, binary: bool, timer: StageTimer) -> None:
    builder.pack()
    timer.lap("Pack Graphics")

    bitmap = builder.composite()
    timer.lap("Generate Texture")

    result = AtlasResult(bitmap=bitmap, textures=builder.textures, config=builder.config)
    result.save_png(output)
    timer.lap("Save PNG")

    written = result.save_metadata(output, binary=binary)
    timer.lap("Save JSON")
    timer.done()

    for path in written:
        click.echo(f"Metadata: {path}")
    click.secho(f"✓ Success! Packed {len(result.textures)} textures into {output}", fg='green')


def _fail(e: Exception, prefix: str = "Error", verbose: bool = False) -> None:
    click.secho(f"{prefix}: {e}", fg='red', err=True)
    if verbose:
        import traceback
        traceback.print_exc()
    sys.exit(1)


@click.group()
@click.version_option(package_name='atlaspack')
def cli():
    """
    atlaspack - Pack sprite images into a single square texture atlas.

    Examples:
        atlaspack pack assets/sprites -o atlas.png -s 256 -e 2 -v
        atlaspack demo -s 960 -b 4
    """
    pass


@cli.command()
@click.argument('input_dir')
@click.option('-o', '--output', default='atlas.png', show_default=True, help='Output PNG path (metadata is written next to it)')
@click.option('-s', '--size', type=int, default=DEFAULT_ATLAS_SIZE, show_default=True, help='Atlas width and height in pixels')
@click.option('-e', '--expand', type=int, default=0, help='Repeat pixels along image edges')
@click.option('-b', '--border', type=int, default=0, help='Empty border space between images')
@click.option('-u', '--unique', is_flag=True, help='Remove duplicates from the atlas (not implemented)')
@click.option('--binary', is_flag=True, help='Also write binary metadata (.bin)')
@click.option('--verbose', '-v', is_flag=True, help='Print packer state and timings')
def pack(input_dir, output, size, expand, border, unique, binary, verbose):
    """
    Pack every PNG/JPEG under INPUT_DIR into one atlas.

    Examples:
        atlaspack pack ~/assets/sprites -o atlas.png -s 256 -e 2
        atlaspack pack sprites -o build/atlas.png --binary -v
    """
    _configure_logging(verbose)
    try:
        config = AtlasConfig(atlas_size=size, expand=expand, border=border, unique=unique)
        timer = StageTimer(verbose)

        if verbose:
            click.echo("Begin Texture Atlas")

        paths = discover_images(input_dir)
        timer.lap("Find Graphics")

        def loaded():
            for path in paths:
                try:
                    source = load_image(path)
                except DecodeFailure as e:
                    if verbose:
                        click.secho(f"   x \"{path}\"", fg='red')
                    yield e
                else:
                    if verbose:
                        click.secho(f"   ✓ \"{path}\"", fg='green')
                    yield source

        builder = AtlasBuilder(config)
        builder.register_sources(loaded())
        timer.lap("Load Graphics")

        _run(builder, output, binary, timer)

    except FileNotFoundError as e:
        _fail(e)
    except ValidationError as e:
        _fail(e, "Invalid configuration")
    except AtlasError as e:
        _fail(e)
    except Exception as e:
        _fail(e, "Unexpected error", verbose)


@cli.command()
@click.option('-o', '--output', default='demo.png', show_default=True, help='Output PNG path')
@click.option('-s', '--size', type=int, default=DEMO_ATLAS_SIZE, show_default=True, help='Atlas width and height in pixels')
@click.option('-e', '--expand', type=int, default=0, help='Repeat pixels along image edges')
@click.option('-b', '--border', type=int, default=0, help='Empty border space between images')
@click.option('--seed', type=int, default=None, help='Seed for a reproducible box set')
@click.option('--binary', is_flag=True, help='Also write binary metadata (.bin)')
@click.option('--verbose', '-v', is_flag=True, help='Print packer state and timings')
def demo(output, size, expand, border, seed, binary, verbose):
    """
    Pack a random set of coloured boxes.

    Examples:
        atlaspack demo -s 960 -b 4
        atlaspack demo -o out/demo.png --seed 7
    """
    _configure_logging(verbose)
    try:
        config = AtlasConfig(atlas_size=size, expand=expand, border=border)
        timer = StageTimer(verbose)

        if verbose:
            click.echo("Begin Texture Atlas")

        boxes = random_boxes(seed)
        timer.lap("Generate Boxes")

        builder = AtlasBuilder(config)
        builder.register_sources(boxes)
        timer.lap("Load Graphics")

        _run(builder, output, binary, timer)

    except ValidationError as e:
        _fail(e, "Invalid configuration")
    except AtlasError as e:
        _fail(e)
    except Exception as e:
        _fail(e, "Unexpected error", verbose)


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
