from .router import AiRouter, RoutedTaskResult
