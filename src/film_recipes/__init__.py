"""Film Recipes - admin data platform for camera film-simulation recipes."""

from film_recipes.utils.constants import APP_VERSION

__version__ = APP_VERSION
