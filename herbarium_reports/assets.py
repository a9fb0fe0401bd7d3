"""
Decorative and photographic image loading.

The logo is a process wide, load-once asset. Specimen photos are fetched per
document. A failed load prints a warning and yields None so the layout can
fall back to a placeholder.
"""

# Standard Library
import asyncio
import io
import pathlib
import urllib.error
import urllib.request

# PIP3 modules
import PIL.Image
import reportlab.lib.utils


#============================================
def decode_image(data: bytes) -> reportlab.lib.utils.ImageReader:
	"""
	Decode image bytes into an ImageReader.

	Args:
		data: Encoded image bytes (PNG, JPEG, ...).

	Returns:
		ImageReader instance.
	"""
	image = PIL.Image.open(io.BytesIO(data))
	image.load()
	if image.mode not in ("RGB", "RGBA", "L"):
		image = image.convert("RGBA")
	return reportlab.lib.utils.ImageReader(image)


#============================================
def read_source(source: str | pathlib.Path) -> bytes:
	"""
	Read raw bytes from an http(s) URL or a local path.
	"""
	text = str(source)
	if text.startswith(("http://", "https://")):
		with urllib.request.urlopen(text) as resp:
			return resp.read()
	return pathlib.Path(text).read_bytes()


#============================================
def load_image(source: str | pathlib.Path | None) -> reportlab.lib.utils.ImageReader | None:
	"""
	Load and decode an image, returning None on failure.

	Args:
		source: URL or file path.

	Returns:
		ImageReader, or None when missing or undecodable.
	"""
	if not source:
		return None
	try:
		data = read_source(source)
		return decode_image(data)
	except (OSError, urllib.error.URLError, PIL.UnidentifiedImageError, ValueError) as exc:
		print(f"Warning: could not load image {source}: {exc}")
		return None


#============================================
async def fetch_image(source: str | pathlib.Path | None) -> reportlab.lib.utils.ImageReader | None:
	"""
	Fetch and decode an image off the event loop.

	There is no timeout and no retry. A stalled fetch stalls only the
	document waiting on it.

	Args:
		source: URL or file path.

	Returns:
		ImageReader, or None on failure.
	"""
	if not source:
		return None
	return await asyncio.to_thread(load_image, source)


class LogoAsset:
	"""
	Lazily loaded logo image, read-only once loaded.
	"""

	def __init__(self, source: str | pathlib.Path | None = None):
		self.source = source
		self._image: reportlab.lib.utils.ImageReader | None = None
		self._loaded = False
		self._lock = asyncio.Lock()

	@property
	def loaded(self) -> bool:
		return self._loaded

	@property
	def image(self) -> reportlab.lib.utils.ImageReader | None:
		"""
		Decoded logo, None before loading or when loading failed.
		"""
		return self._image

	#============================================
	async def ensure_loaded(self) -> reportlab.lib.utils.ImageReader | None:
		"""
		Load the logo on first use.

		Returns:
			Decoded logo or None.
		"""
		if self._loaded:
			return self._image
		async with self._lock:
			if not self._loaded:
				self._image = await fetch_image(self.source)
				self._loaded = True
		return self._image


_LOGO_ASSET: LogoAsset | None = None


#============================================
def get_logo_asset(source: str | pathlib.Path | None = None) -> LogoAsset:
	"""
	Process wide logo asset.

	The first call fixes the source. Later calls return the same instance.

	Args:
		source: Logo URL or path used on first creation.

	Returns:
		LogoAsset singleton.
	"""
	global _LOGO_ASSET
	if _LOGO_ASSET is None:
		_LOGO_ASSET = LogoAsset(source)
	return _LOGO_ASSET


#============================================
def load_logo(asset: LogoAsset | None) -> reportlab.lib.utils.ImageReader | None:
	"""
	Synchronous access to a logo asset for the synchronous composers.

	Args:
		asset: Logo asset or None.

	Returns:
		Decoded logo or None.
	"""
	if asset is None:
		return None
	if asset.loaded:
		return asset.image
	return asyncio.run(asset.ensure_loaded())
