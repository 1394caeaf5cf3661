import os
import uvicorn

if __name__ == "__main__":
    from config import settings

    # アプリケーションデータディレクトリの確保
    os.makedirs(settings.USER_DATA_DIR, exist_ok=True)

    # mainモジュールからappオブジェクトを直接インポート
    from main import app

    print(f"Starting {settings.APP_NAME} server on {settings.HOST}:{settings.PORT}...")
    print(f"Database: {settings.DB_PATH}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, reload=False, workers=1)
