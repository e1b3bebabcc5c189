from typing import Annotated

from fastapi import Depends

from symptrack.core.storage import MemStorage, get_storage

Store = Annotated[MemStorage, Depends(get_storage)]
