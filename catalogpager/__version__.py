__title__ = "catalogpager"
__description__ = "Paginated web-catalog extraction for manga reader sources"
__url__ = "https://github.com/catalogpager/catalogpager"
__version__ = "0.3.0"
__license__ = "GPLv3"
__intro__ = f"{__title__} {__version__} - browse manga catalogs page by page"
