"""Canned transcripts returned by the simulated speech-to-text service."""

TRANSCRIPT_SAMPLES: dict[str, list[str]] = {
    "zh": [
        "你好，我是李心司，这是一段中文语音测试。",
        "今天天气很好，适合出去散步。",
        "我正在测试语音识别功能，希望能够准确识别中文。",
        "这是一个语音克隆项目的测试内容。",
        "中文语音识别技术发展迅速，现在已经非常准确了。",
    ],
    "zh-tw": [
        "您好，我是李心司，這是一段繁體中文語音測試。",
        "今天天氣很好，適合出去散步。",
        "我正在測試語音識別功能，希望能夠準確識別繁體中文。",
        "這是一個語音複製項目的測試內容。",
    ],
    "zh-yue": [
        "你好，我係李心司，呢個係粵語語音測試。",
        "今日天氣好好，啱晒出去行吓。",
        "我而家測試緊語音識別功能，希望識到粵語。",
        "呢個係語音克隆項目嘅測試內容。",
    ],
    "en": [
        "Hello, this is a test audio transcription in English.",
        "The weather is nice today, perfect for a walk outside.",
        "I am testing the speech recognition functionality.",
        "This is test content for a voice cloning project.",
        "English speech recognition has become very accurate recently.",
    ],
    "ja": [
        "こんにちは、これは日本語の音声テストです。",
        "今日は天気がいいですね。",
        "音声認識機能をテストしています。",
        "これは音声クローンプロジェクトのテストです。",
        "日本語の音声認識技術も向上しています。",
    ],
    "ko": [
        "안녕하세요, 이것은 한국어 음성 테스트입니다.",
        "오늘 날씨가 좋네요.",
        "음성 인식 기능을 테스트하고 있습니다.",
        "이것은 음성 복제 프로젝트의 테스트입니다.",
        "한국어 음성 인식 기술도 많이 발전했습니다.",
    ],
    "es": [
        "Hola, esta es una prueba de transcripción de audio en español.",
        "El clima está muy bueno hoy, perfecto para caminar.",
        "Estoy probando la funcionalidad de reconocimiento de voz.",
        "Este es contenido de prueba para un proyecto de clonación de voz.",
    ],
    "fr": [
        "Bonjour, ceci est un test de transcription audio en français.",
        "Il fait beau aujourd'hui, parfait pour une promenade.",
        "Je teste la fonctionnalité de reconnaissance vocale.",
        "Ceci est du contenu de test pour un projet de clonage vocal.",
    ],
    "de": [
        "Hallo, das ist ein Audio-Transkriptionstest auf Deutsch.",
        "Das Wetter ist heute schön, perfekt für einen Spaziergang.",
        "Ich teste die Spracherkennungsfunktion.",
        "Dies ist Testinhalt für ein Stimmklon-Projekt.",
    ],
    "ru": [
        "Привет, это тест транскрипции аудио на русском языке.",
        "Сегодня хорошая погода, отлично подходит для прогулки.",
        "Я тестирую функцию распознавания речи.",
        "Это тестовый контент для проекта клонирования голоса.",
    ],
    "pt": [
        "Olá, este é um teste de transcrição de áudio em português.",
        "O tempo está bom hoje, perfeito para caminhar.",
        "Estou testando a funcionalidade de reconhecimento de voz.",
        "Este é conteúdo de teste para um projeto de clonagem de voz.",
    ],
    "it": [
        "Ciao, questo è un test di trascrizione audio in italiano.",
        "Il tempo è bello oggi, perfetto per una passeggiata.",
        "Sto testando la funzionalità di riconoscimento vocale.",
        "Questo è contenuto di test per un progetto di clonazione vocale.",
    ],
    "ar": [
        "مرحبا، هذا اختبار نسخ صوتي باللغة العربية.",
        "الطقس جميل اليوم، مثالي للمشي.",
        "أنا أختبر وظيفة التعرف على الكلام.",
        "هذا محتوى اختبار لمشروع استنساخ الصوت.",
    ],
    "hi": [
        "नमस्ते, यह हिंदी में ऑडियो ट्रांसक्रिप्शन टेस्ट है।",
        "आज मौसम अच्छा है, टहलने के लिए बिल्कुल सही।",
        "मैं स्पीच रिकग्निशन फंक्शनैलिटी का परीक्षण कर रहा हूं।",
        "यह वॉयस क्लोनिंग प्रोजेक्ट के लिए टेस्ट कंटेंट है।",
    ],
    "th": [
        "สวัสดี นี่คือการทดสอบการถอดเสียงเป็นข้อความในภาษาไทย",
        "วันนี้อากาศดี เหมาะสำหรับการเดินเล่น",
        "ฉันกำลังทดสอบฟังก์ชันการรู้จำเสียงพูด",
        "นี่คือเนื้อหาทดสอบสำหรับโปรเจ็กต์โคลนเสียง",
    ],
    "vi": [
        "Xin chào, đây là bài kiểm tra chuyển đổi âm thanh thành văn bản bằng tiếng Việt.",
        "Hôm nay thời tiết đẹp, rất thích hợp để đi dạo.",
        "Tôi đang kiểm tra chức năng nhận dạng giọng nói.",
        "Đây là nội dung thử nghiệm cho dự án nhân bản giọng nói.",
    ],
}

# Streaming sessions walk through ``partial`` one chunk at a time and pick
# one of ``final`` when the last chunk arrives.
STREAMING_SAMPLES: dict[str, dict[str, list[str]]] = {
    "zh": {
        "partial": [
            "你好...",
            "你好，我是...",
            "你好，我是李心司...",
            "你好，我是李心司，这是...",
            "你好，我是李心司，这是一段...",
            "你好，我是李心司，这是一段中文语音...",
        ],
        "final": [
            "你好，我是李心司，这是一段中文语音测试。",
            "今天天气很好，适合出去散步。",
            "我正在测试实时语音识别功能，希望能够准确识别中文。",
            "这是一个语音克隆项目的实时转录测试。",
        ],
    },
    "en": {
        "partial": [
            "Hello...",
            "Hello, this is...",
            "Hello, this is a test...",
            "Hello, this is a test audio...",
            "Hello, this is a test audio transcription...",
        ],
        "final": [
            "Hello, this is a test audio transcription in English.",
            "The weather is nice today, perfect for a walk outside.",
            "I am testing the real-time speech recognition functionality.",
            "This is a real-time transcription test for a voice cloning project.",
        ],
    },
    "ja": {
        "partial": [
            "こんにちは...",
            "こんにちは、これは...",
            "こんにちは、これは日本語の...",
            "こんにちは、これは日本語の音声テスト...",
        ],
        "final": [
            "こんにちは、これは日本語の音声テストです。",
            "今日は天気がいいですね。",
            "リアルタイム音声認識機能をテストしています。",
        ],
    },
}


def streaming_samples(language: str) -> dict[str, list[str]]:
    """Return the partial/final sample lists for a language, Chinese if unknown."""
    return STREAMING_SAMPLES.get(language, STREAMING_SAMPLES["zh"])
