import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from .config import (
    BlendJob,
    build_placement,
    parse_placement_method,
    parse_position,
    parse_transparency_color,
    parse_weight,
    parse_yes_no,
    position_limit,
    validate_dimensions,
    validate_output_path,
)
from .core import MAX_WEIGHT, MIN_WEIGHT
from .core.compositor import compose
from .core.position import PlacementMode
from .core.transparency import TransparencyFilter
from .errors import InvalidInputError, WatermarkError
from .processors.image import SUPPORTED_OUTPUT_FORMATS, ImageRole, load_image, save_image

app = typer.Typer(
    name="wmb",
    help="Blend a watermark image onto a base image.",
    add_completion=True,
)
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def ask(prompt: str, preset: Optional[str] = None) -> str:
    """
    Read one answer from the user.

    A preset answer (given as a command line option) skips the prompt.
    """
    if preset is not None:
        return preset

    console.print(prompt, markup=False, highlight=False, soft_wrap=True)
    try:
        return console.input()
    except EOFError:
        raise InvalidInputError("No input was provided.") from None


def collect_job(
    base: Optional[str] = None,
    watermark: Optional[str] = None,
    use_alpha: Optional[bool] = None,
    use_color_key: Optional[bool] = None,
    transparency_color: Optional[str] = None,
    weight: Optional[str] = None,
    method: Optional[str] = None,
    position: Optional[str] = None,
    output: Optional[str] = None,
) -> BlendJob:
    """
    Run the prompt sequence and validate every answer.

    Stops at the first invalid answer by raising a WatermarkError.
    """
    base_image = load_image(ask("Input the image filename:", base).strip(), ImageRole.BASE)
    watermark_image = load_image(
        ask("Input the watermark image filename:", watermark).strip(), ImageRole.WATERMARK
    )
    validate_dimensions(base_image, watermark_image)

    if watermark_image.translucent:
        if use_alpha is None:
            use_alpha = parse_yes_no(ask("Do you want to use the watermark's Alpha channel?"))
        transparency = TransparencyFilter.for_watermark(True, use_alpha=use_alpha)
    else:
        if use_color_key is None:
            use_color_key = transparency_color is not None or parse_yes_no(
                ask("Do you want to set a transparency color?")
            )
        key = None
        if use_color_key:
            key = parse_transparency_color(
                ask("Input a transparency color ([Red] [Green] [Blue]):", transparency_color)
            )
        transparency = TransparencyFilter.for_watermark(False, key=key)

    blend_weight = parse_weight(
        ask(f"Input the watermark transparency percentage (Integer {MIN_WEIGHT}-{MAX_WEIGHT}):", weight)
    )

    mode = parse_placement_method(ask("Choose the position method (single, grid):", method))

    offset = (0, 0)
    if mode is PlacementMode.SINGLE:
        max_x, max_y = position_limit(base_image, watermark_image)
        offset = parse_position(
            ask(f"Input the watermark position ([x 0-{max_x}] [y 0-{max_y}]):", position),
            (max_x, max_y),
        )

    output_name = ask("Input the output image filename (jpg or png extension):", output).strip()
    output_path = validate_output_path(output_name)

    job = BlendJob(
        base=base_image,
        watermark=watermark_image,
        transparency=transparency,
        weight=blend_weight,
        placement=build_placement(mode, watermark_image, offset),
        output_path=output_path,
        output_name=output_name,
    )
    logger.debug(
        "Configured %s placement, %s filter, weight %d",
        mode.value,
        transparency.mode.value,
        blend_weight,
    )
    return job


def run_job(job: BlendJob) -> None:
    """Compose and encode a validated job."""
    with console.status("Blending watermark..."):
        grid = compose(job.base, job.watermark, job.placement, job.transparency, job.weight)
    save_image(grid, job.output_name)


@app.command()
def blend(
    base: Optional[str] = typer.Option(
        None,
        "--base",
        "-b",
        help="Base image filename. Prompted for when omitted.",
    ),
    watermark: Optional[str] = typer.Option(
        None,
        "--watermark",
        "-w",
        help="Watermark image filename. Prompted for when omitted.",
    ),
    use_alpha: Optional[bool] = typer.Option(
        None,
        "--use-alpha/--no-use-alpha",
        help="Skip fully transparent watermark pixels (translucent watermarks only)",
    ),
    use_color_key: Optional[bool] = typer.Option(
        None,
        "--use-color-key/--no-use-color-key",
        help="Skip watermark pixels matching a transparency color (opaque watermarks only)",
    ),
    transparency_color: Optional[str] = typer.Option(
        None,
        "--transparency-color",
        "-c",
        help='Transparency color as "R G B"',
    ),
    weight: Optional[str] = typer.Option(
        None,
        "--weight",
        "-p",
        help="Watermark transparency percentage (0-100)",
    ),
    method: Optional[str] = typer.Option(
        None,
        "--method",
        "-m",
        help="Position method: single or grid",
    ),
    position: Optional[str] = typer.Option(
        None,
        "--position",
        help='Watermark position as "x y" (single method only)',
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output image filename (jpg or png extension)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
):
    """
    Blend a watermark onto an image.

    Asks for every setting it was not given as an option, in order:
    image, watermark, transparency handling, percentage, position method,
    position and output filename.

    Examples:
        wmb blend
        wmb blend -b photo.png -w logo.png -p 40 -m grid -o out.png
        wmb blend -b photo.jpg -w logo.png -c "0 0 0" -p 100 -m single --position "10 20" -o out.jpg
    """
    configure_logging(verbose)

    try:
        job = collect_job(
            base=base,
            watermark=watermark,
            use_alpha=use_alpha,
            use_color_key=use_color_key,
            transparency_color=transparency_color,
            weight=weight,
            method=method,
            position=position,
            output=output,
        )
        run_job(job)
    except WatermarkError as e:
        console.print(f"[red]{escape(e.message)}[/red]", soft_wrap=True)
        raise typer.Exit(1)

    console.print(
        f"The watermarked image {escape(job.output_name)} has been created.",
        highlight=False,
        soft_wrap=True,
    )


@app.command()
def info():
    """Display information about supported formats and blending modes."""
    console.print(
        Panel(
            "[bold]Watermark Blender[/bold]\n\n"
            "Blends a watermark image onto a base image pixel by pixel:\n"
            "  result = (p * watermark + (100 - p) * image) / 100\n\n"
            "[cyan]Input Images:[/cyan] 24-bit RGB or 32-bit RGBA\n"
            f"[cyan]Output Formats:[/cyan] {', '.join(sorted(SUPPORTED_OUTPUT_FORMATS))}\n\n"
            "[cyan]Position Methods:[/cyan]\n"
            "  - single: one watermark at an (x, y) offset\n"
            "  - grid: watermark tiled over the whole image\n\n"
            "[cyan]Transparency:[/cyan]\n"
            "  - alpha channel: skip fully transparent watermark pixels\n"
            "  - transparency color: skip watermark pixels of one RGB color",
            title="About",
            border_style="blue",
        )
    )


if __name__ == "__main__":
    app()
