from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from shop_admin.api.auth import get_current_user
from shop_admin.api.pagination import ListParams
from shop_admin.api.schemas import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    CategoryResponse,
    MessageResponse,
    Page,
    ProductCreateRequest,
    ProductMutationResponse,
    ProductResponse,
    ProductUpdateRequest,
    StockUpdateRequest,
)
from shop_admin.services.product_service import ProductService

router = APIRouter(prefix="/products")

product_service = ProductService()


@router.get("", response_model=Page[ProductResponse])
def list_products(
    params: ListParams = Depends(),
    category: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
):
    """获取商品列表（分页）

    默认每页 10 个，按创建时间倒序排列；支持 search / category / status 过滤。
    """
    request = params.to_request({"category": category, "status": status_filter})
    result = product_service.list_products(request)
    return Page[ProductResponse].from_result(result, ProductResponse)


@router.get("/featured", response_model=List[ProductResponse])
def list_featured():
    return [ProductResponse.model_validate(p) for p in product_service.list_featured()]


@router.get("/new", response_model=List[ProductResponse])
def list_new_arrivals():
    return [ProductResponse.model_validate(p) for p in product_service.list_new_arrivals()]


@router.get("/categories", response_model=List[CategoryResponse])
def list_categories():
    return product_service.category_counts()


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: str):
    return ProductResponse.model_validate(product_service.get_product(product_id))


@router.post("", response_model=ProductMutationResponse, status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductCreateRequest, current_user=Depends(get_current_user)):
    product = product_service.create_product(payload.model_dump())
    return ProductMutationResponse(
        product=ProductResponse.model_validate(product),
        message="Product created successfully",
    )


@router.put("/{product_id}", response_model=ProductMutationResponse)
def update_product(product_id: str, payload: ProductUpdateRequest, current_user=Depends(get_current_user)):
    product = product_service.update_product(product_id, payload.to_changes())
    return ProductMutationResponse(
        product=ProductResponse.model_validate(product),
        message="Product updated successfully",
    )


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(product_id: str, current_user=Depends(get_current_user)):
    product_service.delete_product(product_id)
    return MessageResponse(message="Product deleted successfully")


@router.patch("/{product_id}/stock", response_model=ProductMutationResponse)
def update_stock(product_id: str, payload: StockUpdateRequest, current_user=Depends(get_current_user)):
    product = product_service.update_stock(product_id, stock=payload.stock, operation=payload.operation)
    return ProductMutationResponse(
        product=ProductResponse.model_validate(product),
        message="Stock updated successfully",
    )


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
def bulk_delete(payload: BulkDeleteRequest, current_user=Depends(get_current_user)):
    deleted = product_service.bulk_delete(payload.ids)
    return BulkDeleteResponse(
        deleted_products=[ProductResponse.model_validate(p) for p in deleted],
        message=f"{len(deleted)} products deleted successfully",
    )
