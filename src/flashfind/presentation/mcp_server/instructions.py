"""Server instructions shown to AI agents."""

SERVER_INSTRUCTIONS = """
FlashFind gallery server: a personal image collection with multi-modal search.

## Searching
- `search_images(query, mode="local")` matches tags and file names instantly.
- `search_images(query, mode="semantic")` asks the catalog's AI search and maps
  the answer onto the gallery. If the service is down it falls back to local
  matching and says so.
- `search_by_image(path)` describes a reference image and searches with the
  first description.
- `search_by_voice(path)` transcribes a recording and searches with it.
- `clear_search()` shows the whole gallery again.

## Managing the gallery
- `upload_image(path, description, category)` adds an image right away.
- `delete_image(image_id)` only removes the image once the catalog confirms.
- `sync_catalog()` pulls images that exist in the catalog but not locally.
- `gallery_timeline()` and `gallery_statistics()` summarize the collection.
"""
