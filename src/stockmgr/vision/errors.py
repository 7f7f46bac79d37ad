"""画像認識のエラー"""


class ClassifierError(Exception):
    """画像認識エラー"""
    def __init__(self, code: str, message: str = ""):
        self.code = code
        self.message = message
        super().__init__(f"Classifier Error [{code}]: {message}")


class ClassifierConfigError(ClassifierError):
    """APIキー未設定・未知のプロバイダ（通信前に失敗）"""


class ClassifierInputError(ClassifierError):
    """画像データが読めない（通信前に失敗）"""


class ClassifierTransportError(ClassifierError):
    """通信エラー・HTTPエラー"""


class ClassifierParseError(ClassifierError):
    """応答の形式が不正"""
