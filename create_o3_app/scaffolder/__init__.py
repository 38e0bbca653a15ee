"""O3 module scaffolder -- renders the bundled template tree.

Quick usage::

    from create_o3_app.scaffolder import create_project

    file_count = await create_project(project, module, options, cwd="/tmp/out")

``TemplateRenderer`` can also be used directly when only the file tree is
wanted, without git initialisation, dependency installation, or workspace
registration.
"""

from create_o3_app.scaffolder.generator import ProjectGenerator, create_project
from create_o3_app.scaffolder.templates import TemplateRenderer, generate_files

__all__ = [
    "ProjectGenerator",
    "TemplateRenderer",
    "create_project",
    "generate_files",
]
