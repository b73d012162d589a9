"""Interactive window rendering the water surface, its caustics and the pool."""

from __future__ import annotations

import argparse
import math
import sys
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

import numpy as np

from caustics.mesh import BOTTOM_Z, bottom_mesh, skybox_vertices, water_mesh
from caustics.optics import AIR_IOR, WATER_IOR
from caustics.simulation import WaveGrid
from caustics.transforms import look_at, perspective, rotation_only

__all__ = [
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "CLICK_HEIGHT",
    "INITIAL_DISTURBANCES",
    "ShaderError",
    "CausticsWindow",
    "screen_to_grid",
    "seed_grid",
    "compile_program",
    "main",
]

SCREEN_WIDTH = 800
SCREEN_HEIGHT = 600
CLICK_HEIGHT = 5.0
INITIAL_DISTURBANCES = ((50, 50, 2.0), (150, 150, 1.5), (75, 125, 1.8))

_LIGHT_POS = (0.0, 0.0, 100.0)
_CAMERA_POS = (0.0, 0.0, 80.0)
_FOV_DEGREES = 60.0
_NEAR = 0.1
_FAR = 300.0

_MESH_VERTEX_SHADER = """
#version 330 core
layout (location = 0) in vec3 aPos;
layout (location = 1) in vec3 aNormal;

out vec3 FragPos;
out vec3 Normal;

uniform mat4 model;
uniform mat4 view;
uniform mat4 projection;

void main() {
    FragPos = vec3(model * vec4(aPos, 1.0));
    Normal = mat3(transpose(inverse(model))) * aNormal;
    gl_Position = projection * view * vec4(FragPos, 1.0);
}
"""

_CAUSTICS_FRAGMENT_SHADER = """
#version 330 core
in vec3 FragPos;
in vec3 Normal;

out vec4 FragColor;

uniform vec3 lightPos;
uniform float bottomZ;
uniform float waterIOR;
uniform float airIOR;
uniform float time;

void main() {
    vec3 norm = normalize(Normal);
    vec3 lightDir = normalize(lightPos - FragPos);

    // Brightness follows how far the surface tilts away from flat.
    float deviation = length(norm - vec3(0.0, 0.0, 1.0));
    float intensity = deviation * 4.0;
    intensity *= dot(norm.xy, vec2(1.0, 1.0)) * 0.5 + 0.5;
    intensity *= sin(time * 1.5 + FragPos.x * 0.05 + FragPos.y * 0.05) * 0.4 + 0.6;
    intensity *= sin(FragPos.x * 0.1) * cos(FragPos.y * 0.1) * 0.3 + 0.7;
    intensity = clamp(intensity, 0.0, 1.0);

    FragColor = vec4(0.0, 0.0, 0.0, intensity);
}
"""

_BOTTOM_FRAGMENT_SHADER = """
#version 330 core
in vec3 FragPos;
in vec3 Normal;

out vec4 FragColor;

uniform sampler2D causticsTexture;
uniform float time;

void main() {
    float gridSize = 12.0;
    vec2 grid = fract(FragPos.xy / gridSize);
    float gridLine = smoothstep(0.85, 0.9, max(grid.x, grid.y));

    vec3 baseColor = vec3(0.1, 0.4, 0.7);
    vec3 gridColor = vec3(0.3, 0.6, 0.9);
    vec3 finalColor = mix(baseColor, gridColor, gridLine * 0.4);

    vec2 uv = (FragPos.xy + vec2(200.0)) / 400.0;
    float base = texture(causticsTexture, uv).a;
    vec2 offset1 = vec2(sin(time * 0.3) * 0.02, cos(time * 0.4) * 0.02);
    vec2 offset2 = vec2(cos(time * 0.7) * 0.03, sin(time * 0.6) * 0.03);
    float layer1 = texture(causticsTexture, uv + offset1).a;
    float layer2 = texture(causticsTexture, uv + offset2).a * 0.7;
    float total = (base + layer1 + layer2) * 2.5;

    finalColor += vec3(1.5, 1.2, 0.9) * total;
    finalColor = clamp(finalColor, 0.0, 1.2);
    FragColor = vec4(finalColor, 1.0);
}
"""

_WATER_FRAGMENT_SHADER = """
#version 330 core
in vec3 FragPos;
in vec3 Normal;

out vec4 FragColor;

uniform vec3 lightPos;
uniform vec3 viewPos;

void main() {
    vec3 N = normalize(Normal);
    vec3 L = normalize(lightPos - FragPos);
    vec3 V = normalize(viewPos - FragPos);
    vec3 R = reflect(-L, N);

    float diff = max(dot(N, L), 0.0);
    float spec = pow(max(dot(V, R), 0.0), 32.0);

    vec3 result = vec3(0.1) + vec3(0.4) * diff + vec3(0.3) * spec;
    FragColor = vec4(result, 0.5);
}
"""

_SKYBOX_VERTEX_SHADER = """
#version 330 core
layout (location = 0) in vec3 aPos;

out vec3 TexCoords;

uniform mat4 projection;
uniform mat4 view;

void main() {
    TexCoords = aPos;
    vec4 pos = projection * view * vec4(aPos, 1.0);
    gl_Position = pos.xyww;
}
"""

_SKYBOX_FRAGMENT_SHADER = """
#version 330 core
in vec3 TexCoords;

out vec4 FragColor;

void main() {
    float skyFactor = normalize(TexCoords).y * 0.5 + 0.5;
    vec3 skyColor = mix(vec3(0.5, 0.8, 1.0), vec3(0.8, 0.9, 1.0), skyFactor);
    FragColor = vec4(skyColor, 1.0);
}
"""


class ShaderError(RuntimeError):
    """A shader failed to compile or a program failed to link."""


def screen_to_grid(
    xpos: float,
    ypos: float,
    screen_width: int,
    screen_height: int,
    grid_width: int,
    grid_height: int,
) -> tuple[int, int] | None:
    """Map a cursor position (origin top-left) to a grid cell, or ``None`` if outside."""
    normalized_x = xpos / screen_width
    normalized_y = 1.0 - ypos / screen_height
    grid_x = int(normalized_x * grid_width)
    grid_y = int(normalized_y * grid_height)
    if 0 <= grid_x < grid_width and 0 <= grid_y < grid_height:
        return grid_x, grid_y
    return None


def seed_grid(grid: WaveGrid) -> None:
    """Flatten the surface and drop the initial set of disturbances on it."""
    grid.reset()
    for x, y, value in INITIAL_DISTURBANCES:
        grid.add_disturbance(x, y, value)


def compile_program(vertex_source: str, fragment_source: str) -> Any:
    """Compile and link a shader program in the current GL context."""
    from pyglet.graphics.shader import Shader, ShaderException, ShaderProgram

    try:
        vertex = Shader(vertex_source, "vertex")
        fragment = Shader(fragment_source, "fragment")
        return ShaderProgram(vertex, fragment)
    except ShaderException as exc:
        raise ShaderError(str(exc)) from exc


def _column_major(matrix: np.ndarray) -> tuple[float, ...]:
    return tuple(np.asarray(matrix, dtype=np.float32).T.reshape(-1).tolist())


def _set_uniforms(program: Any, values: Mapping[str, Any]) -> None:
    # Uniforms the compiler optimised away are simply not present.
    available = program.uniforms
    for name, value in values.items():
        if name in available:
            program[name] = value


def _generate(gl: Any, generator: Callable[[int, Any], None]) -> int:
    """Ask GL for one new object name through a ``glGen*`` function."""
    names = (gl.GLuint * 1)()
    generator(1, names)
    return int(names[0])


def _delete(gl: Any, deleter: Callable[[int, Any], None], name: int) -> None:
    """Release one GL object name through a ``glDelete*`` function."""
    deleter(1, (gl.GLuint * 1)(name))


@dataclass
class _VertexArray:
    vao: int
    vbo: int
    ebo: int | None
    count: int


def _create_vertex_array(
    gl: Any,
    vertices: np.ndarray,
    indices: np.ndarray | None,
    usage: int,
    components: Sequence[int],
) -> _VertexArray:
    data = np.ascontiguousarray(vertices, dtype=np.float32)
    vao = _generate(gl, gl.glGenVertexArrays)
    gl.glBindVertexArray(vao)

    vbo = _generate(gl, gl.glGenBuffers)
    gl.glBindBuffer(gl.GL_ARRAY_BUFFER, vbo)
    gl.glBufferData(gl.GL_ARRAY_BUFFER, data.nbytes, data.tobytes(), usage)

    ebo_id = None
    count = len(data)
    if indices is not None:
        index_data = np.ascontiguousarray(indices, dtype=np.uint32)
        ebo_id = _generate(gl, gl.glGenBuffers)
        gl.glBindBuffer(gl.GL_ELEMENT_ARRAY_BUFFER, ebo_id)
        gl.glBufferData(
            gl.GL_ELEMENT_ARRAY_BUFFER,
            index_data.nbytes,
            index_data.tobytes(),
            gl.GL_STATIC_DRAW,
        )
        count = index_data.size

    float_size = np.dtype(np.float32).itemsize
    stride = sum(components) * float_size
    offset = 0
    for location, size in enumerate(components):
        gl.glVertexAttribPointer(location, size, gl.GL_FLOAT, gl.GL_FALSE, stride, offset)
        gl.glEnableVertexAttribArray(location)
        offset += size * float_size

    gl.glBindVertexArray(0)
    return _VertexArray(vao, vbo, ebo_id, count)


class CausticsWindow:
    """A window that advances the wave simulation and draws it every frame."""

    def __init__(self, grid: WaveGrid) -> None:
        import pyglet
        from pyglet import gl

        self._gl = gl
        self.grid = grid
        config = pyglet.gl.Config(
            major_version=3,
            minor_version=3,
            forward_compatible=True,
            double_buffer=True,
            depth_size=24,
        )
        self.window = pyglet.window.Window(
            width=SCREEN_WIDTH,
            height=SCREEN_HEIGHT,
            caption="Water Caustics",
            config=config,
        )

        self._water_program = compile_program(_MESH_VERTEX_SHADER, _WATER_FRAGMENT_SHADER)
        self._skybox_program = compile_program(_SKYBOX_VERTEX_SHADER, _SKYBOX_FRAGMENT_SHADER)
        self._caustics_program = compile_program(
            _MESH_VERTEX_SHADER, _CAUSTICS_FRAGMENT_SHADER
        )
        self._bottom_program = compile_program(_MESH_VERTEX_SHADER, _BOTTOM_FRAGMENT_SHADER)

        surface = water_mesh(grid)
        self._water = _create_vertex_array(
            gl, surface.vertices, surface.indices, gl.GL_DYNAMIC_DRAW, (3, 3)
        )
        bottom = bottom_mesh(grid.width, grid.height)
        self._bottom = _create_vertex_array(
            gl, bottom.vertices, bottom.indices, gl.GL_STATIC_DRAW, (3, 3)
        )
        self._skybox = _create_vertex_array(
            gl, skybox_vertices(), None, gl.GL_STATIC_DRAW, (3,)
        )

        gl.glEnable(gl.GL_DEPTH_TEST)
        gl.glEnable(gl.GL_CULL_FACE)
        gl.glCullFace(gl.GL_BACK)

        self._fbo, self._texture = self._create_caustics_target()
        self._start = time.perf_counter()
        self._released = False
        self.window.push_handlers(self)

    def _create_caustics_target(self) -> tuple[int, int]:
        gl = self._gl
        fbo = _generate(gl, gl.glGenFramebuffers)
        gl.glBindFramebuffer(gl.GL_FRAMEBUFFER, fbo)

        texture = _generate(gl, gl.glGenTextures)
        gl.glBindTexture(gl.GL_TEXTURE_2D, texture)
        gl.glTexImage2D(
            gl.GL_TEXTURE_2D, 0, gl.GL_RGBA32F, SCREEN_WIDTH, SCREEN_HEIGHT, 0,
            gl.GL_RGBA, gl.GL_FLOAT, None,
        )
        gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_MIN_FILTER, gl.GL_LINEAR)
        gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_MAG_FILTER, gl.GL_LINEAR)
        gl.glFramebufferTexture2D(
            gl.GL_FRAMEBUFFER, gl.GL_COLOR_ATTACHMENT0, gl.GL_TEXTURE_2D, texture, 0
        )
        gl.glDrawBuffers(1, (gl.GLenum * 1)(gl.GL_COLOR_ATTACHMENT0))
        if gl.glCheckFramebufferStatus(gl.GL_FRAMEBUFFER) != gl.GL_FRAMEBUFFER_COMPLETE:
            print("FBO incomplete", file=sys.stderr)

        gl.glClearColor(0.0, 0.0, 0.0, 0.0)
        gl.glClear(gl.GL_COLOR_BUFFER_BIT)
        gl.glBindFramebuffer(gl.GL_FRAMEBUFFER, 0)
        return fbo, texture

    def _draw_elements(self, target: _VertexArray) -> None:
        gl = self._gl
        gl.glBindVertexArray(target.vao)
        gl.glDrawElements(gl.GL_TRIANGLES, target.count, gl.GL_UNSIGNED_INT, 0)

    def on_draw(self) -> None:
        gl = self._gl
        elapsed = time.perf_counter() - self._start

        self.grid.step()
        vertices = np.ascontiguousarray(water_mesh(self.grid).vertices, dtype=np.float32)
        gl.glBindBuffer(gl.GL_ARRAY_BUFFER, self._water.vbo)
        gl.glBufferSubData(gl.GL_ARRAY_BUFFER, 0, vertices.nbytes, vertices.tobytes())

        gl.glClearColor(0.2, 0.2, 0.2, 1.0)
        gl.glClear(gl.GL_COLOR_BUFFER_BIT | gl.GL_DEPTH_BUFFER_BIT)

        view = look_at(_CAMERA_POS, (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
        projection = perspective(
            math.radians(_FOV_DEGREES), SCREEN_WIDTH / SCREEN_HEIGHT, _NEAR, _FAR
        )
        model = np.identity(4, dtype=np.float32)
        camera = {
            "model": _column_major(model),
            "view": _column_major(view),
            "projection": _column_major(projection),
        }

        # Accumulate caustic intensity into the offscreen texture.
        gl.glBindFramebuffer(gl.GL_FRAMEBUFFER, self._fbo)
        gl.glClearColor(0.0, 0.0, 0.0, 0.0)
        gl.glClear(gl.GL_COLOR_BUFFER_BIT)
        gl.glEnable(gl.GL_BLEND)
        gl.glBlendFunc(gl.GL_ONE, gl.GL_ONE)
        gl.glDisable(gl.GL_DEPTH_TEST)
        self._caustics_program.use()
        _set_uniforms(
            self._caustics_program,
            {
                **camera,
                "lightPos": _LIGHT_POS,
                "bottomZ": BOTTOM_Z,
                "waterIOR": WATER_IOR,
                "airIOR": AIR_IOR,
                "time": elapsed,
            },
        )
        self._draw_elements(self._water)
        gl.glDisable(gl.GL_BLEND)
        gl.glEnable(gl.GL_DEPTH_TEST)
        gl.glBindFramebuffer(gl.GL_FRAMEBUFFER, 0)

        # Pool bottom lit by the caustics texture.
        self._bottom_program.use()
        gl.glActiveTexture(gl.GL_TEXTURE0)
        gl.glBindTexture(gl.GL_TEXTURE_2D, self._texture)
        _set_uniforms(
            self._bottom_program, {**camera, "causticsTexture": 0, "time": elapsed}
        )
        self._draw_elements(self._bottom)

        # Semi-transparent water surface.
        gl.glEnable(gl.GL_BLEND)
        gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)
        self._water_program.use()
        _set_uniforms(
            self._water_program,
            {**camera, "lightPos": _LIGHT_POS, "viewPos": _CAMERA_POS},
        )
        self._draw_elements(self._water)
        gl.glDisable(gl.GL_BLEND)

        # Sky in the background.
        gl.glDepthMask(gl.GL_FALSE)
        self._skybox_program.use()
        _set_uniforms(
            self._skybox_program,
            {
                "view": _column_major(rotation_only(view)),
                "projection": _column_major(projection),
            },
        )
        gl.glBindVertexArray(self._skybox.vao)
        gl.glDrawArrays(gl.GL_TRIANGLES, 0, self._skybox.count)
        gl.glDepthMask(gl.GL_TRUE)
        gl.glBindVertexArray(0)

    def on_resize(self, width: int, height: int) -> bool:
        from pyglet.event import EVENT_HANDLED

        fb_width, fb_height = self.window.get_framebuffer_size()
        self._gl.glViewport(0, 0, fb_width, fb_height)
        return EVENT_HANDLED

    def on_key_press(self, symbol: int, modifiers: int) -> bool | None:
        from pyglet.event import EVENT_HANDLED
        from pyglet.window import key

        if symbol == key.ESCAPE:
            self.window.dispatch_event("on_close")
            return EVENT_HANDLED
        return None

    def on_mouse_press(self, x: int, y: int, button: int, modifiers: int) -> None:
        from pyglet.window import mouse

        if button != mouse.LEFT:
            return
        cell = screen_to_grid(
            x,
            self.window.height - y,
            SCREEN_WIDTH,
            SCREEN_HEIGHT,
            self.grid.width,
            self.grid.height,
        )
        if cell is not None:
            self.grid.add_disturbance(cell[0], cell[1], CLICK_HEIGHT)

    def on_close(self) -> None:
        """Release GL objects; the window itself is closed by the default handler."""
        if self._released:
            return
        self._released = True
        gl = self._gl
        self.window.switch_to()
        for target in (self._water, self._bottom, self._skybox):
            _delete(gl, gl.glDeleteVertexArrays, target.vao)
            _delete(gl, gl.glDeleteBuffers, target.vbo)
            if target.ebo is not None:
                _delete(gl, gl.glDeleteBuffers, target.ebo)
        _delete(gl, gl.glDeleteFramebuffers, self._fbo)
        _delete(gl, gl.glDeleteTextures, self._texture)
        for program in (
            self._water_program,
            self._skybox_program,
            self._caustics_program,
            self._bottom_program,
        ):
            program.delete()


def main(argv: Sequence[str] | None = None) -> int:
    """Open the caustics window and run until it is closed."""
    parser = argparse.ArgumentParser(
        prog="caustics",
        description="Real-time water surface with caustics on the pool floor. "
        "Click to disturb the water, press Escape to quit.",
    )
    parser.parse_args(argv)

    import pyglet

    grid = WaveGrid()
    try:
        window = CausticsWindow(grid)
    except ShaderError as exc:
        print(f"shader error: {exc}", file=sys.stderr)
        return 1
    seed_grid(grid)
    pyglet.app.run()
    del window
    return 0


if __name__ == "__main__":
    sys.exit(main())