"""FastAPI web app for dash-flow animation generation."""

from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.requests import Request
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates

from dash_flow.animation_pipeline import encode_animation
from dash_flow.animator.speed import (
    SPEED_PRESETS,
    SpeedCurveMapper,
    find_closest_preset,
    format_duration,
    format_speed,
)
from dash_flow.config import AnimationConfig, EncoderOptions
from dash_flow.constants import (
    DEFAULT_BACKGROUND,
    DEFAULT_COLOR_FROM,
    DEFAULT_COLOR_TO,
    DEFAULT_FPS,
    SPEED_DEFAULT,
)
from dash_flow.errors import InvalidSceneError
from dash_flow.output import (
    media_type_for_output_format,
    output_path_for_format,
)

load_dotenv()

app = FastAPI(title="Dash Flow")

templates = Jinja2Templates(directory=Path(__file__).parent / "templates")
speed_mapper = SpeedCurveMapper()


@app.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Serve the main page."""
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "presets": SPEED_PRESETS,
            "default_slider": round(speed_mapper.speed_to_slider(SPEED_DEFAULT)),
        },
    )


@app.get("/api/speed")
async def speed(
    slider: float = Query(..., ge=0, le=100, description="Slider position (0-100)"),
    fps: int = Query(DEFAULT_FPS, gt=0, description="Frames per second"),
):
    """Describe the speed, cycle duration and frame count for a slider position."""
    value = speed_mapper.slider_to_speed(slider)
    duration = speed_mapper.duration(value)
    return {
        "slider": slider,
        "speed": value,
        "label": format_speed(value),
        "duration": duration,
        "duration_label": format_duration(duration),
        "frames": speed_mapper.frame_count(value, fps),
        "preset": find_closest_preset(value).id,
    }


@app.post("/api/generate")
async def generate(
    request: Request,
    slider: float | None = Query(None, ge=0, le=100, description="Slider position (0-100)"),
    fps: int = Query(DEFAULT_FPS, gt=0, le=50, description="Frames per second"),
    color_from: str = Query(DEFAULT_COLOR_FROM, description="Base stroke color"),
    color_to: str = Query(DEFAULT_COLOR_TO, description="Highlight color"),
    glint: bool = Query(False, description="Sweep a glint along each path"),
    gradient_wave: bool = Query(False, description="Scroll a color wave across strokes"),
    background: str = Query(DEFAULT_BACKGROUND, description="Background color"),
    transparent: bool = Query(False, description="Make the background transparent"),
    output_format: str = Query("gif", alias="format", description="Output format: gif or webp"),
):
    """Animate the SVG document in the request body and return the encoded animation."""
    markup = await request.body()
    if not markup:
        raise HTTPException(status_code=400, detail="Request body must contain an SVG document")

    try:
        output_path = output_path_for_format(output_format)
        media_type = media_type_for_output_format(output_format)
        value = speed_mapper.slider_to_speed(slider) if slider is not None else SPEED_DEFAULT
        config = AnimationConfig(
            speed=value,
            color_from=color_from,
            color_to=color_to,
            use_glint_overlay=glint,
            use_gradient_wave=gradient_wave,
            background=background,
        )
        options = EncoderOptions.from_env(transparent=transparent, background=background)
        encoded = await run_in_threadpool(
            encode_animation,
            markup,
            config,
            output_path,
            fps=fps,
            encoder_options=options,
            speed_mapper=speed_mapper,
        )
        return Response(
            content=encoded,
            media_type=media_type,
            headers={
                "Response-Type": "blob",
                "Content-Disposition": f"inline; filename=dash-flow.{output_format}",
            },
        )
    except (InvalidSceneError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to generate animation: {e}")
